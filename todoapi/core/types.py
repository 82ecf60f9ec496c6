from typing import List, Type

from pydantic import BaseModel


class TaskSchema(BaseModel):
    """A task schema with strongly-typed input and output models"""

    name: str
    input_schema: None | Type[BaseModel] = None
    output_schema: None | Type[BaseModel] = None


class StatusOutput(BaseModel):
    status: str


class EndpointsOutput(BaseModel):
    endpoints: List[str]


StatusSchema = TaskSchema(name="status", output_schema=StatusOutput)
EndpointsSchema = TaskSchema(name="endpoints", output_schema=EndpointsOutput)
