"""
Service d'export CSV/Excel / CSV/Excel export service.
Génère des fichiers CSV et XLSX à partir de listes de dictionnaires.
"""

import csv
import io
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Font

# Colonnes exportées, dans l'ordre / Exported columns, in order
RECORD_FIELDS = ["id", "lorry_number", "record_date", "price", "liters", "created_at"]


class ExportService:
    """Export de données vers CSV/XLSX / Data export to CSV/XLSX."""

    @staticmethod
    def to_csv(rows: list[dict[str, Any]], fields: list[str] = RECORD_FIELDS) -> bytes:
        """Générer un CSV UTF-8 séparé par des virgules / Generate a comma separated UTF-8 CSV."""
        output = io.StringIO(newline="")
        writer = csv.DictWriter(output, fieldnames=fields, extrasaction="ignore")
        writer.writeheader()
        for row in rows:
            writer.writerow({f: row.get(f, "") for f in fields})
        return output.getvalue().encode("utf-8")

    @staticmethod
    def to_xlsx(rows: list[dict[str, Any]], fields: list[str] = RECORD_FIELDS, sheet_name: str = "Records") -> bytes:
        """Générer un fichier Excel / Generate an Excel file."""
        wb = Workbook()
        ws = wb.active
        ws.title = sheet_name

        # En-têtes / Headers
        for col_idx, field in enumerate(fields, 1):
            cell = ws.cell(row=1, column=col_idx, value=field)
            cell.font = Font(bold=True)

        # Données / Data rows
        for row_idx, row in enumerate(rows, 2):
            for col_idx, field in enumerate(fields, 1):
                ws.cell(row=row_idx, column=col_idx, value=row.get(field))

        buf = io.BytesIO()
        wb.save(buf)
        return buf.getvalue()
