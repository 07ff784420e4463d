import unittest

from invoice_fixtures import TEST_LOGO, sample_invoice

from tax_invoice.validation import validate_invoice


def messages(data, logo=TEST_LOGO):
    return [str(error) for error in validate_invoice(data, logo)]


class ValidatorTests(unittest.TestCase):
    def test_valid_invoice_has_no_errors(self) -> None:
        self.assertEqual(validate_invoice(sample_invoice(), TEST_LOGO), [])

    def test_missing_nested_field_is_named(self) -> None:
        data = sample_invoice()
        del data["storeDetails"]["address"]

        self.assertEqual(messages(data), ["Missing Store address"])

    def test_blank_strings_count_as_missing(self) -> None:
        data = sample_invoice(paymentMethod="   ")

        self.assertIn("Missing Payment method", messages(data))

    def test_missing_section_reports_each_required_field(self) -> None:
        data = sample_invoice()
        del data["deliveryPartner"]

        self.assertEqual(
            messages(data),
            [
                "Missing Delivery partner name",
                "Missing Tracking ID",
                "Missing Estimated delivery date",
            ],
        )

    def test_section_of_wrong_type_is_reported(self) -> None:
        data = sample_invoice(customer="Asha")

        result = messages(data)
        self.assertIn("Invalid Customer details", result)
        self.assertIn("Missing Customer name", result)

    def test_every_missing_field_is_reported(self) -> None:
        data = sample_invoice()
        del data["storeName"]
        del data["invoiceDetails"]["orderNumber"]
        data["customer"]["city"] = ""
        del data["termsAndConditions"]

        result = messages(data)
        self.assertGreaterEqual(len(result), 4)
        for expected in (
            "Missing Store name",
            "Missing Order number",
            "Missing Customer city",
            "Missing Terms and conditions",
        ):
            self.assertIn(expected, result)

    def test_validation_is_idempotent(self) -> None:
        data = sample_invoice(storeName="", products=[{"name": "", "quantity": 1, "mrp": 5, "price": 9}])

        self.assertEqual(validate_invoice(data, None), validate_invoice(data, None))

    def test_optional_fields_may_be_absent(self) -> None:
        data = sample_invoice()
        del data["color"]
        del data["customer"]["email"]
        del data["products"][0]["brand"]
        del data["products"][0]["batch"]
        del data["products"][0]["expiry"]

        self.assertEqual(messages(data), [])

    def test_invalid_colour_and_date(self) -> None:
        data = sample_invoice(color="dark blue")
        data["invoiceDetails"]["date"] = "not a date"

        result = messages(data)
        self.assertIn("Invalid accent color", result)
        self.assertIn("Invalid Invoice date", result)

    def test_partial_dates_are_invalid(self) -> None:
        for raw in ("5", "Monday", "March 2024"):
            with self.subTest(raw=raw):
                data = sample_invoice()
                data["invoiceDetails"]["date"] = raw
                data["products"][0]["expiry"] = raw

                self.assertEqual(
                    messages(data),
                    ["Invalid Invoice date", "Product 1: Invalid expiry date"],
                )

    def test_free_text_delivery_estimate_is_accepted(self) -> None:
        data = sample_invoice()
        data["deliveryPartner"]["estimatedDelivery"] = "Monday, before noon"

        self.assertEqual(messages(data), [])

    def test_oversized_amounts_are_rejected(self) -> None:
        data = sample_invoice(products=[{"name": "Gold", "quantity": 1, "mrp": 1e30, "price": 1e30}])

        self.assertEqual(
            messages(data),
            [
                "Product 1: MRP is too large",
                "Product 1: Price is too large",
                "Product 1: Line total is too large",
            ],
        )

    def test_line_total_is_bounded(self) -> None:
        data = sample_invoice(products=[{"name": "Bulk", "quantity": 100000, "mrp": 20000, "price": 100}])

        self.assertEqual(messages(data), ["Product 1: Line total is too large"])

    def test_price_above_mrp_names_the_product(self) -> None:
        data = sample_invoice()
        data["products"].append({"name": "Cetirizine", "quantity": 1, "mrp": "20", "price": "25"})

        self.assertEqual(messages(data), ["Product 2: Price cannot be greater than MRP"])

    def test_price_equal_to_mrp_is_allowed(self) -> None:
        data = sample_invoice(products=[{"name": "ORS", "quantity": "3", "mrp": "19.5", "price": "19.50"}])

        self.assertEqual(messages(data), [])

    def test_missing_product_fields_are_index_qualified(self) -> None:
        data = sample_invoice(products=[{"name": "ORS", "quantity": 1, "mrp": 10, "price": 8}, {"brand": "Acme"}])

        self.assertEqual(
            messages(data),
            [
                "Product 2: Missing name",
                "Product 2: Missing quantity",
                "Product 2: Missing MRP",
                "Product 2: Missing price",
            ],
        )

    def test_numeric_product_fields_are_checked(self) -> None:
        data = sample_invoice(
            products=[
                {"name": "A", "quantity": "two", "mrp": 10, "price": 8},
                {"name": "B", "quantity": 0, "mrp": -1, "price": 0, "expiry": "soon"},
            ]
        )

        self.assertEqual(
            messages(data),
            [
                "Product 1: Quantity must be a number",
                "Product 2: Invalid expiry date",
                "Product 2: Quantity must be greater than zero",
                "Product 2: MRP cannot be negative",
                "Product 2: Price cannot be greater than MRP",
            ],
        )

    def test_empty_products_give_single_error(self) -> None:
        for products in ([], None, "Paracetamol"):
            with self.subTest(products=products):
                result = messages(sample_invoice(products=products))
                self.assertEqual(result, ["At least one product is required"])

    def test_non_object_product_is_reported(self) -> None:
        self.assertEqual(messages(sample_invoice(products=["Paracetamol"])), ["Product 1: Invalid product"])

    def test_missing_logo_fails_request(self) -> None:
        self.assertEqual(messages(sample_invoice(), logo=None), ["Missing logo"])

    def test_logo_check_can_be_skipped(self) -> None:
        self.assertEqual(validate_invoice(sample_invoice(), None, require_logo=False), [])

    def test_non_object_root(self) -> None:
        self.assertEqual(messages(["not", "an", "invoice"]), ["Invoice data must be an object"])

    def test_errors_carry_field_paths(self) -> None:
        data = sample_invoice()
        del data["customer"]["phone"]
        data["products"][0]["price"] = 60

        paths = [error.path for error in validate_invoice(data, TEST_LOGO)]
        self.assertEqual(paths, ["customer.phone", "products[0]"])


if __name__ == "__main__":
    unittest.main()
