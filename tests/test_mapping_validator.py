from __future__ import annotations

import unittest

from app.domain.gets_schema import GETS_FIELDS
from app.validators.mapping_validator import MappingValidator, SchemaMappingError


class TestMappingValidator(unittest.TestCase):
    def setUp(self) -> None:
        self.validator = MappingValidator(standard_fields=GETS_FIELDS)

    def test_raises_on_unknown_targets(self) -> None:
        with self.assertRaises(SchemaMappingError) as ctx:
            self.validator.validate(
                mapping={
                    "inv": "invoice.id",
                    "num": "invoice.number",
                    "mail": "buyer.email",
                },
            )

        self.assertEqual(
            ctx.exception.message,
            "The following target fields are not valid: invoice.number, buyer.email",
        )
        self.assertEqual(ctx.exception.invalid_targets, ["invoice.number", "buyer.email"])
        codes = {error.code for error in ctx.exception.errors}
        self.assertEqual(codes, {"invalid_target_field"})

    def test_raises_on_non_object_payload(self) -> None:
        with self.assertRaises(SchemaMappingError) as ctx:
            self.validator.validate(mapping=["invoice.id"])

        self.assertEqual(ctx.exception.message, "Mappings must be an object.")
        self.assertEqual(ctx.exception.errors[0].code, "invalid_mapping_payload")
        self.assertEqual(ctx.exception.errors[0].context, {"received_type": "list"})

    def test_error_payload_lists_invalid_fields(self) -> None:
        with self.assertRaises(SchemaMappingError) as ctx:
            self.validator.validate(mapping={"x": "seller.vat"})

        payload = ctx.exception.to_dict()
        self.assertEqual(payload["invalid_fields"], ["seller.vat"])
        self.assertEqual(payload["errors"][0]["source_column"], "x")

    def test_returns_normalized_mapping_when_valid(self) -> None:
        result = self.validator.validate(
            mapping={"inv": "invoice.id", "notes": "", "extra": None},
        )

        self.assertEqual(result, {"inv": "invoice.id", "notes": None, "extra": None})

    def test_check_does_not_raise(self) -> None:
        result = self.validator.check({"a": "nope"})

        self.assertFalse(result.valid)
        self.assertEqual(result.invalid_targets, ["nope"])

    def test_non_string_targets_are_invalid(self) -> None:
        cases = (
            (5, "5"),
            (True, "true"),
            (["invoice.id"], '["invoice.id"]'),
            ({"a": 1}, '{"a": 1}'),
        )
        for target, shown in cases:
            with self.subTest(target=target):
                with self.assertRaises(SchemaMappingError) as ctx:
                    self.validator.validate(mapping={"col": target})

                self.assertEqual(ctx.exception.invalid_targets, [shown])
                self.assertEqual(ctx.exception.errors[0].code, "invalid_target_type")
                self.assertEqual(ctx.exception.errors[0].source_column, "col")

    def test_mixed_invalid_targets_share_one_message(self) -> None:
        with self.assertRaises(SchemaMappingError) as ctx:
            self.validator.validate(mapping={"a": 0, "b": "invoice.number", "c": "invoice.id"})

        self.assertEqual(
            ctx.exception.message,
            "The following target fields are not valid: 0, invoice.number",
        )
        self.assertEqual(ctx.exception.to_dict()["invalid_fields"], ["0", "invoice.number"])


if __name__ == "__main__":
    unittest.main()
