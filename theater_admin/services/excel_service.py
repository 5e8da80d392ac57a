"""
Excel export of check-in lists and reservations
"""

import io
from typing import List

import pandas as pd

from theater_admin.schemas.reservation import CheckInEntry, Reservation

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class ExcelService:
    """Service for building .xlsx downloads"""

    CHECKIN_COLUMNS = ["Name", "Company", "Guests", "Package", "Allergies", "Remarks", "Checked In"]
    RESERVATION_COLUMNS = [
        "Date", "Name", "Company", "Email", "Phone", "Guests", "Package",
        "Pre-show Drinks", "After Party", "Promo Code", "Discount", "Total", "Status", "Checked In",
    ]

    @staticmethod
    def _to_xlsx(df: pd.DataFrame, sheet_name: str) -> bytes:
        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name=sheet_name)
        return buffer.getvalue()

    @staticmethod
    def checkin_frame(entries: List[CheckInEntry]) -> pd.DataFrame:
        rows = [
            {
                "Name": e.contact_name,
                "Company": e.company_name or "",
                "Guests": e.guests,
                "Package": e.drink_package,
                "Allergies": e.allergies or "",
                "Remarks": e.remarks or "",
                "Checked In": "Yes" if e.checked_in else "No",
            }
            for e in entries
        ]
        return pd.DataFrame(rows, columns=ExcelService.CHECKIN_COLUMNS)

    @staticmethod
    def reservations_frame(reservations: List[Reservation]) -> pd.DataFrame:
        rows = [
            {
                "Date": r.date,
                "Name": r.contact_name,
                "Company": r.company_name or "",
                "Email": r.email or "",
                "Phone": r.phone or "",
                "Guests": r.guests,
                "Package": r.drink_package,
                "Pre-show Drinks": "Yes" if r.pre_show_drinks else "No",
                "After Party": "Yes" if r.after_party else "No",
                "Promo Code": r.promo_code or "",
                "Discount": r.discount_amount,
                "Total": r.total_price,
                "Status": r.status,
                "Checked In": "Yes" if r.checked_in else "No",
            }
            for r in reservations
        ]
        return pd.DataFrame(rows, columns=ExcelService.RESERVATION_COLUMNS)

    @staticmethod
    def export_checkin_list(entries: List[CheckInEntry], date: str) -> bytes:
        """Printable door list for one date, with a total row"""
        df = ExcelService.checkin_frame(entries)
        if not df.empty:
            total = {column: "" for column in ExcelService.CHECKIN_COLUMNS}
            total.update({"Name": "Total", "Guests": int(df["Guests"].sum())})
            df.loc[len(df)] = total
        return ExcelService._to_xlsx(df, sheet_name=f"Check-in {date}")

    @staticmethod
    def export_reservations(reservations: List[Reservation]) -> bytes:
        return ExcelService._to_xlsx(ExcelService.reservations_frame(reservations), sheet_name="Reservations")
