from pydantic import BaseModel


class ProcessHtmlRequest(BaseModel):
    html: str | None = None
    iframeUrl: str | None = None


class ProcessHtmlResponse(BaseModel):
    ok: bool = True
    count: int
    totalQuestions: int
    message: str | None = None
