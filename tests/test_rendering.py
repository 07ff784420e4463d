import os
import tempfile
import unittest
from datetime import datetime
from importlib import util as importlib_util

from invoice_fixtures import png_bytes, sample_invoice

FPDF_AVAILABLE = importlib_util.find_spec("fpdf") is not None
FONT_AVAILABLE = False
if FPDF_AVAILABLE:
    from tax_invoice.fonts import FontManager
    from tax_invoice.rendering import generate_invoice_file, render_invoice
    from tax_invoice.uploads import inspect_logo

    FONT_AVAILABLE = FontManager.regular_font_path() is not None


@unittest.skipUnless(FPDF_AVAILABLE and FONT_AVAILABLE, "fpdf2 or a Unicode font is not installed")
class RenderingTests(unittest.TestCase):
    def test_render_invoice_returns_pdf_bytes(self) -> None:
        pdf = render_invoice(sample_invoice(), png_bytes(), "image/png", generated_at=datetime(2024, 3, 20, 15, 30))

        self.assertIsInstance(pdf, bytes)
        self.assertTrue(pdf.startswith(b"%PDF"))
        self.assertGreater(len(pdf), 100)

    def test_long_terms_still_render(self) -> None:
        data = sample_invoice(termsAndConditions="\n".join(f"Clause {i}" for i in range(40)))

        with self.assertLogs("tax_invoice.rendering", level="WARNING"):
            pdf = render_invoice(data, png_bytes(), "image/png")

        self.assertTrue(pdf.startswith(b"%PDF"))

    def test_generate_invoice_file_removes_temporary_files(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            upload_dir = os.path.join(tmp, "uploads")
            output_dir = os.path.join(tmp, "output")
            logo = inspect_logo(png_bytes(), "image/png")

            pdf = generate_invoice_file(sample_invoice(), logo, "1700000000000-42", upload_dir, output_dir)

            self.assertTrue(pdf.startswith(b"%PDF"))
            self.assertEqual(os.listdir(upload_dir), [])
            self.assertEqual(os.listdir(output_dir), [])


if __name__ == "__main__":
    unittest.main()
