# file: farmstand/VENDORS/hours.py
import logging
from typing import Dict, List

from pydantic import ValidationError

from farmstand.core.exceptions import ValidationFailed
from farmstand.VENDORS.models import WEEKDAYS, WeeklyHours
from farmstand.VENDORS.records import VendorRecords, describe_validation_error

logger = logging.getLogger("vendors.hours")


def format_12_hour(value: str) -> str:
    """'13:05' -> '1:05 PM'. An empty time reads as 'Open'."""
    if not value:
        return "Open"
    hours, minutes = value.split(":")
    hour = int(hours)
    ampm = "PM" if hour >= 12 else "AM"
    hour = hour % 12 or 12
    return f"{hour}:{minutes} {ampm}"


def hours_table(hours: WeeklyHours) -> List[Dict[str, str]]:
    """Display rows for the public vendor page, Mon..Sun."""
    rows = []
    for tag in WEEKDAYS:
        day = hours.day(tag)
        if day.closed:
            rows.append({"day": tag, "open": "Closed", "close": "Closed"})
        else:
            rows.append({"day": tag, "open": format_12_hour(day.open), "close": format_12_hour(day.close)})
    return rows


class HoursEditor:
    def __init__(self, records: VendorRecords, vendor_id: str, hours: WeeklyHours):
        self.records = records
        self.vendor_id = vendor_id
        self.hours = hours

    def save(self, data) -> WeeklyHours:
        if isinstance(data, WeeklyHours):
            hours = data
        else:
            try:
                hours = WeeklyHours.model_validate(data)
            except ValidationError as e:
                raise ValidationFailed(f"Please check your hours: {describe_validation_error(e)}") from e
        self.records.patch(self.vendor_id, "hours", hours)
        self.hours = hours
        logger.info("Vendor %s saved hours", self.vendor_id)
        return hours
