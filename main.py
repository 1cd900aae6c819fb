# main.py

from typing import List, Optional
from urllib.parse import quote

from fastapi import Depends, FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from mathdoc.app_logic import convert_files, generate_excel_document, generate_word_document
from mathdoc.config import Settings, load_settings
from mathdoc.doc_generator import DOCX_MIME_TYPE
from mathdoc.errors import DocumentGenerationError, ExtractionError, TableFormatError
from mathdoc.excel_generator import XLSX_MIME_TYPE
from mathdoc.extraction import SourceFile, extract_content, list_available_models
from mathdoc.schemas import ExtractResponse, GenerateRequest

ACCEPTED_CONTENT_PREFIXES = ("image/", "application/pdf")

app = FastAPI(
    title="AI Math Document API",
    description="Extracts questions and equations from images and builds Word or Excel files.",
    version="1.0.0",
)

origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_settings = load_settings()


def get_settings() -> Settings:
    return _settings


def _attachment(content: bytes, file_name: str, media_type: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(file_name)}"},
    )


async def _read_sources(files: List[UploadFile], format: str) -> List[SourceFile]:
    if format not in ('docx', 'excel'):
        raise HTTPException(status_code=400, detail=f"Unsupported format '{format}'.")

    sources = []
    for upload in files:
        content_type = upload.content_type or ""
        if not content_type.startswith(ACCEPTED_CONTENT_PREFIXES):
            raise HTTPException(status_code=400, detail=f"'{upload.filename}' is not an image or PDF.")
        sources.append(SourceFile(data=await upload.read(), mime_type=content_type, name=upload.filename or ""))
    return sources


@app.get("/")
def read_root():
    """
    Health check.

    Returns:
        dict: A welcome message.
    """
    return {"message": "AI Math Document API is running."}


@app.get("/models")
async def models_endpoint(settings: Settings = Depends(get_settings)):
    """Lists the Gemini models available to the configured key (connection check)."""
    try:
        return {"models": await list_available_models(settings)}
    except ExtractionError as e:
        raise HTTPException(status_code=502, detail=str(e))


@app.post("/extract", response_model=ExtractResponse)
async def extract_endpoint(
        files: List[UploadFile] = File(...),
        format: str = Form('docx'),
        settings: Settings = Depends(get_settings)
):
    """
    Receives images/PDFs and returns the AI-extracted text.

    Raises:
        HTTPException: 400 for bad uploads or format, 502 when every model failed.
    """
    sources = await _read_sources(files, format)
    try:
        text = await extract_content(sources, format, settings=settings)
    except ExtractionError as e:
        raise HTTPException(status_code=502, detail=f"Failed to extract content: {e}")
    return ExtractResponse(text=text, format=format)


@app.post("/generate-docx")
async def generate_docx_endpoint(request: GenerateRequest, settings: Settings = Depends(get_settings)):
    """Builds a Word document with native equations from extracted text."""
    if not request.text.strip():
        raise HTTPException(status_code=400, detail="Text cannot be empty.")
    try:
        docx_bytes, file_name, _ = await generate_word_document(request.text, request.file_name, settings=settings)
    except DocumentGenerationError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return _attachment(docx_bytes, file_name, DOCX_MIME_TYPE)


@app.post("/generate-excel")
def generate_excel_endpoint(request: GenerateRequest, settings: Settings = Depends(get_settings)):
    """Builds an Excel workbook from the JSON array-of-arrays extracted in table mode."""
    try:
        xlsx_bytes, file_name = generate_excel_document(request.text, request.file_name, settings=settings)
    except TableFormatError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except DocumentGenerationError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return _attachment(xlsx_bytes, file_name, XLSX_MIME_TYPE)


@app.post("/convert")
async def convert_endpoint(
        files: List[UploadFile] = File(...),
        format: str = Form('docx'),
        file_name: Optional[str] = Form(None),
        settings: Settings = Depends(get_settings)
):
    """
    One-shot conversion: images/PDFs in, .docx or .xlsx out.

    Raises:
        HTTPException: 400 for bad uploads, 502 when extraction failed, 422 for an
            unusable table, 500 when the file could not be packed.
    """
    sources = await _read_sources(files, format)
    try:
        file_bytes, final_name = await convert_files(sources, format, file_name, settings=settings)
    except ExtractionError as e:
        raise HTTPException(status_code=502, detail=f"Failed to extract content: {e}")
    except TableFormatError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except DocumentGenerationError as e:
        raise HTTPException(status_code=500, detail=str(e))
    media_type = XLSX_MIME_TYPE if format == 'excel' else DOCX_MIME_TYPE
    return _attachment(file_bytes, final_name, media_type)
