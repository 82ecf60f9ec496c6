"""Development entry point for uvicorn with hot reload (`uvicorn todoapi.dev:app --reload`)."""
from todoapi import TodoApiService

# Create service instance - uvicorn needs an 'app' variable
_service = TodoApiService()
app = _service.app
