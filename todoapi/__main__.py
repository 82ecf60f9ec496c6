"""Entry point for running the service via `python -m todoapi`."""

from todoapi import TodoApiService
from todoapi.core.settings import get_todoapi_config

if __name__ == "__main__":
    url = get_todoapi_config().URL

    print(f"Starting todo service at {url}...")
    print("Press Ctrl+C to stop.")

    TodoApiService.launch(url=url)
