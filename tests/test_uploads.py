import json
import unittest

from invoice_fixtures import multipart_body, png_bytes, sample_invoice

from tax_invoice.errors import AssetError, LogoTooLargeError, RequestError
from tax_invoice.uploads import inspect_logo, parse_invoice_submission, parse_multipart


class MultipartTests(unittest.TestCase):
    def test_parses_fields_and_binary_file(self) -> None:
        logo = png_bytes(120, 60)
        body, content_type = multipart_body(
            {"data": json.dumps({"storeName": "Café ₹"})},
            {"logo": ("logo.png", "image/png", logo)},
        )

        submission = parse_multipart(content_type, body)

        self.assertEqual(json.loads(submission.fields["data"]), {"storeName": "Café ₹"})
        upload = submission.files["logo"]
        self.assertEqual(upload.filename, "logo.png")
        self.assertEqual(upload.content_type, "image/png")
        self.assertEqual(upload.data, logo)

    def test_rejects_non_multipart_body(self) -> None:
        with self.assertRaises(RequestError):
            parse_multipart("application/json", b"{}")


class LogoInspectionTests(unittest.TestCase):
    def test_reads_png_dimensions(self) -> None:
        asset = inspect_logo(png_bytes(200, 50), "image/png")

        self.assertEqual(asset.size, (200, 50))
        self.assertEqual(asset.mime_type, "image/png")
        self.assertEqual(asset.extension, ".png")

    def test_detects_type_when_not_declared(self) -> None:
        self.assertEqual(inspect_logo(png_bytes()).mime_type, "image/png")

    def test_rejects_other_mime_types(self) -> None:
        with self.assertRaises(AssetError) as ctx:
            inspect_logo(b"GIF89a", "image/gif")
        self.assertEqual(str(ctx.exception), "Invalid file type. Only JPG and PNG allowed.")

    def test_rejects_oversized_logo(self) -> None:
        with self.assertRaises(LogoTooLargeError):
            inspect_logo(b"x" * 2048, "image/png", max_bytes=1024)

    def test_rejects_undecodable_image(self) -> None:
        with self.assertRaises(AssetError):
            inspect_logo(b"definitely not a png", "image/png")


class SubmissionTests(unittest.TestCase):
    def test_returns_document_and_logo(self) -> None:
        body, content_type = multipart_body(
            {"data": json.dumps(sample_invoice())},
            {"logo": ("logo.png", "image/png", png_bytes())},
        )

        data, logo = parse_invoice_submission(content_type, body)

        self.assertEqual(data["storeName"], "City Pharmacy")
        assert logo is not None
        self.assertEqual(logo.size, (160, 80))

    def test_empty_file_part_means_no_logo(self) -> None:
        body, content_type = multipart_body(
            {"data": json.dumps(sample_invoice())},
            {"logo": ("", "application/octet-stream", b"")},
        )

        _, logo = parse_invoice_submission(content_type, body)
        self.assertIsNone(logo)

    def test_requires_data_field(self) -> None:
        body, content_type = multipart_body({"other": "1"})

        with self.assertRaises(RequestError):
            parse_invoice_submission(content_type, body)

    def test_rejects_invalid_json(self) -> None:
        body, content_type = multipart_body({"data": '{"storeName":'})

        with self.assertRaises(RequestError):
            parse_invoice_submission(content_type, body)


if __name__ == "__main__":
    unittest.main()
