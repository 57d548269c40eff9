from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.concurrency import run_in_threadpool

from app.api.dependencies import provide_archive_service, provide_html_service, provide_image_service
from app.api.schemas.answers import ClearAnswersResponse
from app.api.schemas.image import AskImageResponse
from app.api.schemas.process import ProcessHtmlRequest, ProcessHtmlResponse
from app.application.services import AnswerArchiveService, HtmlQuestionAnsweringService, ImageQuestionService

router = APIRouter(tags=["harvest"])


@router.post("/process-html", response_model=ProcessHtmlResponse, response_model_exclude_none=True)
async def process_html(
    body: ProcessHtmlRequest | None = None,
    service: HtmlQuestionAnsweringService = Depends(provide_html_service),
):
    body = body or ProcessHtmlRequest()
    result = await run_in_threadpool(service.process, html=body.html, iframe_url=body.iframeUrl)

    if not result.questions:
        return ProcessHtmlResponse(count=0, totalQuestions=0, message="No questions found")
    return ProcessHtmlResponse(count=len(result.answers), totalQuestions=len(result.questions))


@router.get("/json")
async def get_answers(service: AnswerArchiveService = Depends(provide_archive_service)):
    return await run_in_threadpool(service.list_answers)


@router.post("/clear-answers", response_model=ClearAnswersResponse)
async def clear_answers(service: AnswerArchiveService = Depends(provide_archive_service)):
    await run_in_threadpool(service.clear)
    return ClearAnswersResponse()


@router.post("/ask-image-gpt", response_model=AskImageResponse)
async def ask_image(
    file: UploadFile | None = File(default=None),
    service: ImageQuestionService = Depends(provide_image_service),
):
    payload = await file.read() if file is not None else None
    text = await run_in_threadpool(service.ask, payload)
    return AskImageResponse(text=text)
