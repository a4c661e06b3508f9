"""PDF text extraction that preserves the printed column layout."""

import os
import shutil
import subprocess
import pdfplumber
from pathlib import Path
from loguru import logger


ENGINES = ("pdftotext", "pdfplumber")


class PDFProcessor:
    """Extract layout-preserving text from statement PDFs."""

    def __init__(self, engine: str = "pdftotext"):
        """
        Initialize PDF processor.

        Args:
            engine: "pdftotext" (poppler) or "pdfplumber"
        """
        if engine not in ENGINES:
            raise ValueError(f"Unknown extraction engine: {engine}")
        self.engine = engine

        # Use an explicit pdftotext binary if provided
        self.pdftotext_path = os.getenv("PDFTOTEXT_PATH") or "pdftotext"
        if engine == "pdftotext":
            if shutil.which(self.pdftotext_path):
                logger.info(f"pdftotext configured at: {self.pdftotext_path}")
            else:
                logger.warning(f"pdftotext not found at: {self.pdftotext_path}")

        logger.debug(f"PDF Processor initialized with {engine} engine")

    def extract_with_pdftotext(self, pdf_path: str) -> str:
        """
        Extract text by running ``pdftotext -layout <pdf> -``.

        Args:
            pdf_path: Path to PDF file

        Returns:
            Extracted text content

        Raises:
            subprocess.CalledProcessError: If pdftotext exits non-zero
            FileNotFoundError: If the pdftotext binary is missing
        """
        try:
            result = subprocess.run(
                [self.pdftotext_path, "-layout", pdf_path, "-"],
                capture_output=True,
                text=True,
                check=True
            )
        except subprocess.CalledProcessError as e:
            logger.error(f"pdftotext failed with exit code {e.returncode}: {e.stderr}")
            raise
        except FileNotFoundError:
            logger.error(f"pdftotext executable not found: {self.pdftotext_path}")
            raise

        logger.info(f"Extracted {len(result.stdout)} characters from {pdf_path}")
        return result.stdout

    def extract_with_pdfplumber(self, pdf_path: str) -> str:
        """
        Extract text using pdfplumber's layout mode.

        Args:
            pdf_path: Path to PDF file

        Returns:
            Extracted text content, pages joined by newlines
        """
        try:
            text_content = []

            with pdfplumber.open(pdf_path) as pdf:
                for page_num, page in enumerate(pdf.pages, 1):
                    text = page.extract_text(layout=True)
                    if text:
                        # Layout mode pads lines to the page width
                        lines = [line.rstrip(" ") for line in text.split("\n")]
                        text_content.append("\n".join(lines))
                    else:
                        logger.warning(f"No text found on page {page_num}")

            # Terminate the last page too, like pdftotext does
            full_text = "".join(page_text + "\n" for page_text in text_content)
            logger.info(f"Extracted {len(full_text)} characters from {pdf_path}")
            return full_text

        except Exception as e:
            logger.error(f"Text extraction failed: {e}")
            raise

    def extract_text(self, pdf_path: str) -> str:
        """
        Extract statement text with the configured engine.

        Args:
            pdf_path: Path to PDF file

        Returns:
            Layout-preserving text of the whole document
        """
        if not Path(pdf_path).exists():
            logger.error(f"PDF not found: {pdf_path}")
            raise FileNotFoundError(f"PDF not found: {pdf_path}")

        if self.engine == "pdfplumber":
            return self.extract_with_pdfplumber(pdf_path)
        return self.extract_with_pdftotext(pdf_path)
