"""Document loading for ingestion: text, Markdown, PDF and JSON corpus files."""

import json
import logging
from pathlib import Path

import fitz  # PyMuPDF

from f1rag.errors import InvalidInputError
from f1rag.models import Document

logger = logging.getLogger(__name__)

TEXT_EXTENSIONS = {".txt", ".md"}
SUPPORTED_EXTENSIONS = TEXT_EXTENSIONS | {".pdf", ".json"}


def extract_text_from_pdf(pdf_path: Path) -> str:
    """Extract all text from a PDF file.

    Args:
        pdf_path: Path to the PDF file

    Returns:
        str: Concatenated text from all pages
    """
    doc = fitz.open(pdf_path)
    text = ""

    for page in doc:
        text += page.get_text()

    doc.close()
    return text


def title_from_path(path: Path) -> str:
    """Derive a title from a filename: ``red_bull-racing.txt`` -> ``Red Bull Racing``."""
    return path.stem.replace("_", " ").replace("-", " ").strip().title()


def load_json_corpus(path: Path, default_type: str = "general") -> list[Document]:
    """Load documents from a JSON file holding a list of document objects.

    Each object needs 'title' and 'content'; 'type' and 'source' are optional.
    A top-level object with a 'documents' list is accepted as well.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("documents", [])
    if not isinstance(data, list):
        raise InvalidInputError(f"{path.name}: expected a list of documents")

    documents = []
    for position, item in enumerate(data):
        if not isinstance(item, dict) or "title" not in item or "content" not in item:
            raise InvalidInputError(f"{path.name}: document {position} needs 'title' and 'content'")
        item.setdefault("type", default_type)
        item.setdefault("source", path.stem)
        documents.append(Document.from_dict(item))
    return documents


def load_document(path: Path, doc_type: str | None = None) -> list[Document]:
    """Load one file as a list of documents.

    Args:
        path: A .txt, .md, .pdf or .json file
        doc_type: Category tag; defaults to the parent directory name

    Returns:
        list[Document]: One document per text/PDF file, many for JSON corpora
    """
    suffix = path.suffix.lower()
    doc_type = doc_type or path.parent.name or "general"

    if suffix == ".json":
        return load_json_corpus(path, doc_type)

    if suffix == ".pdf":
        text = extract_text_from_pdf(path)
    elif suffix in TEXT_EXTENSIONS:
        text = path.read_text(encoding="utf-8")
    else:
        raise InvalidInputError(f"Unsupported file type: {path.name}")

    logger.info(f"  Extracted {len(text)} characters from {path.name}")
    return [Document(title=title_from_path(path), content=text, type=doc_type, source=path.name)]


def load_documents_from_directory(directory: Path, doc_type: str | None = None) -> list[Document]:
    """Load every supported file in a directory (non-recursive, sorted by name).

    Files that fail to load are logged and skipped.
    """
    documents = []
    for path in sorted(directory.iterdir()):
        if not path.is_file() or path.suffix.lower() not in SUPPORTED_EXTENSIONS:
            continue
        try:
            documents.extend(load_document(path, doc_type))
        except Exception as e:
            logger.error(f"❌ Error loading {path.name}: {e}")
    logger.info(f"📚 Loaded {len(documents)} documents from {directory}")
    return documents
