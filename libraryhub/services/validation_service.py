"""
Validation Service for reusable request data validation
Provides consistent validation logic across the API blueprints
"""
import math
import re
from datetime import datetime, date
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Any, Tuple, Optional

from libraryhub.utils.helper import to_money, MAX_MONEY, ZERO


class ValidationService:
    """Centralized validation service"""

    MONTH_PATTERN = re.compile(r'^\d{4}-\d{2}$')
    PAYMENT_METHODS = ['cash', 'online']

    @staticmethod
    def parse_month(month_str: str) -> Tuple[bool, Optional[Tuple[int, int]], str]:
        """
        Validate a YYYY-MM month filter

        Returns:
            Tuple of (is_valid, (year, month) or None, error_message)
        """
        if not month_str or not ValidationService.MONTH_PATTERN.match(month_str):
            return False, None, "Invalid month format. Use YYYY-MM"

        year, month = (int(part) for part in month_str.split('-'))
        if not 1 <= month <= 12:
            return False, None, "Invalid month format. Use YYYY-MM"

        return True, (year, month), ""

    @staticmethod
    def parse_int(value: Any, field_name: str = "ID") -> Tuple[bool, Optional[int], str]:
        """Validate an integer identifier (query string or JSON)"""
        if isinstance(value, bool):
            return False, None, f"Invalid {field_name}"
        try:
            return True, int(value), ""
        except (TypeError, ValueError):
            return False, None, f"Invalid {field_name}"

    @staticmethod
    def validate_payment_amount(amount: Any) -> Tuple[bool, str]:
        """
        Validate a payment amount coming from JSON

        Only real JSON numbers are accepted, and they must still be greater
        than zero and fit a money column once rounded to cents.
        """
        if isinstance(amount, bool) or not isinstance(amount, (int, float)):
            return False, "Invalid payment_amount"

        if not math.isfinite(amount) or amount <= 0:
            return False, "Invalid payment_amount"

        try:
            rounded = to_money(amount)
        except InvalidOperation:
            return False, "Invalid payment_amount"

        if rounded <= ZERO or rounded > MAX_MONEY:
            return False, "Invalid payment_amount"

        return True, ""

    @staticmethod
    def validate_choice(value: str, choices: List[str], field_name: str = "Selection") -> Tuple[bool, str]:
        """
        Validate choice fields

        Args:
            value: Value to validate
            choices: List of valid choices
            field_name: Name of the field for error messages

        Returns:
            Tuple of (is_valid, error_message)
        """
        if not value:
            return False, f"{field_name} is required"

        if value not in choices:
            return False, f"Invalid {field_name}. Must be one of: {', '.join(choices)}"

        return True, ""

    @staticmethod
    def parse_date(date_str: Any, field_name: str = "Date") -> Tuple[bool, Optional[date], str]:
        """
        Validate a YYYY-MM-DD date

        Returns:
            Tuple of (is_valid, parsed date or None, error_message)
        """
        if not date_str:
            return False, None, f"{field_name} is required"

        if isinstance(date_str, date):
            return True, date_str, ""

        try:
            return True, datetime.strptime(str(date_str), '%Y-%m-%d').date(), ""
        except ValueError:
            return False, None, f"Invalid {field_name} format (YYYY-MM-DD expected)"

    @staticmethod
    def parse_money(value: Any, field_name: str = "Amount", required: bool = False) -> Tuple[bool, Optional[Decimal], str]:
        """Validate a non-negative money value (missing counts as 0 unless required)"""
        if value is None or value == '':
            if required:
                return False, None, f"{field_name} is required"
            return True, to_money(0), ""

        if isinstance(value, bool):
            return False, None, f"Invalid {field_name}"

        try:
            amount = to_money(value)
        except (InvalidOperation, ValueError):
            return False, None, f"Invalid {field_name}"

        if not amount.is_finite():
            return False, None, f"Invalid {field_name}"

        if amount < 0:
            return False, None, f"{field_name} cannot be negative"

        if amount > MAX_MONEY:
            return False, None, f"{field_name} is too large"

        return True, amount, ""

    @staticmethod
    def validate_name(name: str, field_name: str = "Name") -> Tuple[bool, str]:
        if name is None or name == '':
            return False, f"{field_name} is required"

        if not isinstance(name, str):
            return False, f"{field_name} must be text"

        if not name.strip():
            return False, f"{field_name} is required"

        if len(name) > 100:
            return False, f"{field_name} is too long"

        return True, ""

    @staticmethod
    def validate_membership_data(data: Dict[str, Any]) -> Tuple[Dict[str, List[str]], Dict[str, Any]]:
        """
        Validate the fee and period fields of a new billing period

        Args:
            data: Request JSON

        Returns:
            Tuple of (field errors, cleaned values)
        """
        errors = {}
        cleaned = {}

        is_valid, start, error = ValidationService.parse_date(data.get('membership_start'), 'Membership start')
        if not is_valid:
            errors['membership_start'] = [error]
        cleaned['membership_start'] = start

        is_valid, end, error = ValidationService.parse_date(data.get('membership_end'), 'Membership end')
        if not is_valid:
            errors['membership_end'] = [error]
        cleaned['membership_end'] = end

        if start and end and end < start:
            errors['membership_end'] = ["Membership end cannot be before membership start"]

        for field, label in (('total_fee', 'Total fee'), ('cash', 'Cash'),
                             ('online', 'Online'), ('security_money', 'Security money')):
            is_valid, amount, error = ValidationService.parse_money(data.get(field), label)
            if not is_valid:
                errors[field] = [error]
            cleaned[field] = amount

        if not errors and cleaned['cash'] + cleaned['online'] > cleaned['total_fee']:
            errors['total_fee'] = ["Amount paid cannot exceed total fee"]

        return errors, cleaned
