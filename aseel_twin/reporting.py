"""
Aseel Digital Twin — Flock Report
Excel workbook summarising flock valuations and offspring forecasts.
"""

from typing import Dict, Iterable, List, Optional, Tuple
import logging

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side
from openpyxl.utils import get_column_letter

from .config import MARKET
from .core.twin import DigitalTwin
from .genetics.dominance import DOMINANCE_TABLE_VERSION, PhenotypePrediction

logger = logging.getLogger(__name__)

# Pairing label (e.g. "AS-001 x AS-014") -> Monte-Carlo distribution
Forecasts = Dict[str, List[Tuple[PhenotypePrediction, float]]]

HEADER_FILL = PatternFill(start_color="1F4E79", end_color="1F4E79", fill_type="solid")
HEADER_FONT = Font(bold=True, color="FFFFFF")
INJURED_FILL = PatternFill(start_color="FFC7CE", end_color="FFC7CE", fill_type="solid")
CHAMPION_FILL = PatternFill(start_color="FFEB9C", end_color="FFEB9C", fill_type="solid")
THIN_BORDER = Border(
    left=Side(style='thin'), right=Side(style='thin'),
    top=Side(style='thin'), bottom=Side(style='thin')
)

VALUATION_HEADERS = [
    'Bird ID', 'Name', 'Gender', 'Stage', 'Age (days)',
    'Morphology', 'Genetics', 'Performance', 'Health',
    'Valuation', f'Est. Value ({MARKET.currency})', 'Certification', 'Health Status',
]
VALUATION_WIDTHS = [14, 18, 10, 16, 11, 12, 10, 12, 9, 10, 16, 14, 14]

FORECAST_HEADERS = ['Pairing', 'Local Type', 'Base Color', 'Silver/Gold', 'Blue', 'Probability']
FORECAST_WIDTHS = [26, 14, 16, 12, 10, 12]


def _write_header(ws, row: int, headers: List[str], widths: List[int]):
    for col, header in enumerate(headers, 1):
        cell = ws.cell(row=row, column=col, value=header)
        cell.fill = HEADER_FILL
        cell.font = HEADER_FONT
        cell.border = THIN_BORDER
        cell.alignment = Alignment(horizontal='center')
    for col, width in enumerate(widths, 1):
        ws.column_dimensions[get_column_letter(col)].width = width


def build_flock_workbook(twins: Iterable[DigitalTwin], forecasts: Optional[Forecasts] = None) -> Workbook:
    """Build the flock workbook: one valuation row per active twin, plus forecasts if given."""
    wb = Workbook()

    # ===== SHEET 1: Flock Valuation =====
    ws1 = wb.active
    ws1.title = "Flock Valuation"
    ws1['A1'] = "ASEEL FLOCK VALUATION"
    ws1['A1'].font = Font(bold=True, size=14)

    active = [t for t in twins if not t.is_deleted]
    ws1['A2'] = f"Birds: {len(active)}"
    _write_header(ws1, 4, VALUATION_HEADERS, VALUATION_WIDTHS)

    row = 5
    for twin in sorted(active, key=lambda t: (-(t.valuation_score or 0), t.bird_id)):
        values = [
            twin.bird_id, twin.bird_name, twin.gender, twin.lifecycle_stage, twin.age_days,
            twin.morphology_score, twin.genetics_score, twin.performance_score, twin.health_score,
            twin.valuation_score,
            round(twin.estimated_value, 2) if twin.estimated_value is not None else None,
            twin.certification_level, twin.current_health_status,
        ]
        fill = None
        if not twin.is_fit:
            fill = INJURED_FILL
        elif twin.is_champion:
            fill = CHAMPION_FILL

        for col, value in enumerate(values, 1):
            cell = ws1.cell(row=row, column=col, value=value)
            cell.border = THIN_BORDER
            if fill is not None:
                cell.fill = fill
        row += 1

    total_value = sum(t.estimated_value or 0.0 for t in active)
    ws1.cell(row=row + 1, column=10, value="TOTAL").font = Font(bold=True)
    ws1.cell(row=row + 1, column=11, value=round(total_value, 2)).font = Font(bold=True)

    # ===== SHEET 2: Offspring Forecast =====
    if forecasts:
        ws2 = wb.create_sheet("Offspring Forecast")
        ws2['A1'] = "OFFSPRING COLOUR FORECAST"
        ws2['A1'].font = Font(bold=True, size=14)
        ws2['A2'] = f"Dominance table v{DOMINANCE_TABLE_VERSION}"
        ws2['A2'].font = Font(italic=True, color="1F4E79")
        _write_header(ws2, 3, FORECAST_HEADERS, FORECAST_WIDTHS)

        row = 4
        for pairing, distribution in forecasts.items():
            for prediction, probability in distribution:
                values = [
                    pairing, prediction.suggested_local_type, prediction.base_color,
                    prediction.silver_gold, prediction.blue_effect, probability,
                ]
                for col, value in enumerate(values, 1):
                    cell = ws2.cell(row=row, column=col, value=value)
                    cell.border = THIN_BORDER
                ws2.cell(row=row, column=6).number_format = '0.0%'
                row += 1

    return wb


def save_flock_report(twins: Iterable[DigitalTwin], path: str, forecasts: Optional[Forecasts] = None) -> str:
    wb = build_flock_workbook(twins, forecasts)
    wb.save(path)
    logger.info(f"Flock report written to {path}")
    return path
