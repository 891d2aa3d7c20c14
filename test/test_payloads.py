import unittest
from datetime import date

from models.bond_calculation import ToolRequest
from sscmfi_mcp.payloads import (
    PAYLOAD_SHAPES,
    build_flat_payload,
    build_nested_payload,
    default_settlement_date,
    get_payload_builder,
)


def _arguments(**overrides):
    arguments = {
        "securityType": "Treasury",
        "maturityDate": "12/31/2030",
        "couponRate": 5.0,
        "givenType": "Price",
        "givenValue": 98.5,
        "settlementDate": "01/15/2024",
    }
    arguments.update(overrides)
    return arguments


class FlatPayloadTests(unittest.TestCase):
    def test_every_field_is_forwarded_unmodified(self):
        arguments = _arguments()

        self.assertEqual(build_flat_payload(arguments), arguments)

    def test_validated_request_round_trips_through_flat_payload(self):
        schedule = [{"date": "06/15/2027", "price": 102}, {"date": "06/15/2028", "price": 101.5}]
        arguments = _arguments(couponRate=5, givenType="Yield", givenValue=4.25, callSchedule=schedule)

        payload = build_flat_payload(ToolRequest.model_validate(arguments).to_arguments())

        self.assertEqual(payload, arguments)
        self.assertIsInstance(payload["couponRate"], int)
        self.assertIsInstance(payload["callSchedule"][0]["price"], int)

    def test_call_schedule_is_omitted_when_not_supplied(self):
        self.assertNotIn("callSchedule", build_flat_payload(_arguments()))

    def test_missing_required_field_propagates(self):
        arguments = _arguments()
        del arguments["maturityDate"]

        with self.assertRaises(KeyError):
            build_flat_payload(arguments)


class NestedPayloadTests(unittest.TestCase):
    def test_fields_are_split_into_security_and_trade_definitions(self):
        schedule = [{"date": "06/15/2027", "price": 102.0}]

        payload = build_nested_payload(_arguments(callSchedule=schedule))

        self.assertEqual(
            payload,
            {
                "securityDefinition": {
                    "securityType": "Treasury",
                    "paymentType": "periodic",
                    "maturityDate": "12/31/2030",
                    "couponRate": 5.0,
                    "callSchedule": schedule,
                },
                "tradeDefinition": {
                    "settlementDate": "01/15/2024",
                    "givenType": "Price",
                    "givenValue": 98.5,
                },
            },
        )
        self.assertIs(payload["securityDefinition"]["callSchedule"], schedule)

    def test_missing_settlement_date_defaults_to_injected_today(self):
        arguments = _arguments()
        del arguments["settlementDate"]

        payload = build_nested_payload(arguments, today=lambda: date(2024, 3, 7))

        self.assertEqual(payload["tradeDefinition"]["settlementDate"], "03/07/2024")

    def test_supplied_settlement_date_wins_over_default(self):
        payload = build_nested_payload(_arguments(), today=lambda: date(2024, 3, 7))

        self.assertEqual(payload["tradeDefinition"]["settlementDate"], "01/15/2024")


class PayloadBuilderRegistryTests(unittest.TestCase):
    def test_default_settlement_date_format(self):
        self.assertEqual(default_settlement_date(lambda: date(2025, 12, 1)), "12/01/2025")

    def test_builders_are_selected_by_explicit_shape(self):
        self.assertEqual(PAYLOAD_SHAPES, ("flat", "nested"))
        self.assertIs(get_payload_builder("flat"), build_flat_payload)
        self.assertIs(get_payload_builder("nested"), build_nested_payload)

    def test_unknown_shape_is_rejected(self):
        with self.assertRaises(ValueError):
            get_payload_builder("xml")


if __name__ == "__main__":
    unittest.main()
