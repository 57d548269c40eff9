from pydantic import BaseModel


class AskImageResponse(BaseModel):
    text: str
