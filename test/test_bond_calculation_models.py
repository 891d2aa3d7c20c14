import unittest

from pydantic import ValidationError

from models.bond_calculation import ToolRequest, ToolResult


class ToolRequestTests(unittest.TestCase):
    def test_accepts_wire_names_and_drops_absent_call_schedule(self):
        request = ToolRequest.model_validate(
            {
                "securityType": "Municipal",
                "maturityDate": "06/01/2035",
                "couponRate": 4,
                "givenType": "Yield",
                "givenValue": 3.75,
                "settlementDate": "02/01/2024",
            }
        )

        self.assertEqual(request.security_type, "Municipal")
        self.assertEqual(request.given_type, "Yield")
        self.assertNotIn("callSchedule", request.to_arguments())

    def test_rejects_strings_for_numbers(self):
        with self.assertRaises(ValidationError):
            ToolRequest.model_validate(
                {
                    "securityType": "CD",
                    "maturityDate": "06/01/2025",
                    "couponRate": "5.0",
                    "givenType": "Price",
                    "givenValue": 100,
                    "settlementDate": "02/01/2024",
                }
            )

    def test_call_schedule_entries_require_date_and_price(self):
        with self.assertRaises(ValidationError):
            ToolRequest.model_validate(
                {
                    "securityType": "Corporate",
                    "maturityDate": "06/01/2035",
                    "couponRate": 6.0,
                    "givenType": "Price",
                    "givenValue": 101.0,
                    "settlementDate": "02/01/2024",
                    "callSchedule": [{"date": "06/01/2030"}],
                }
            )


class ToolResultTests(unittest.TestCase):
    def test_payload_uses_agent_facing_names(self):
        result = ToolResult(price=99.0, yield_=4.5, accrued_interest=0.5, total_settlement=99.5, settlement_date="x")

        self.assertEqual(
            result.to_payload(),
            {"price": 99.0, "yield": 4.5, "accruedInterest": 0.5, "totalSettlement": 99.5, "settlementDate": "x"},
        )


if __name__ == "__main__":
    unittest.main()
