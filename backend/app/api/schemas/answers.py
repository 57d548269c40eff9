from pydantic import BaseModel


class ClearAnswersResponse(BaseModel):
    ok: bool = True
    message: str = "answers.json cleared"
