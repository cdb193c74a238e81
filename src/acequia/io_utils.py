import json
import logging
import os
from collections.abc import Iterable

import pandas as pd

from .allocation import HourReport
from .common import volume_to_rate
from .system import AcequiaSystem

logger = logging.getLogger(__name__)

REPORT_COLUMNS = ["hour", "canal_id", "donor", "target", "water_source", "amount", "flow_rate"]


def load_system(filename: str | os.PathLike) -> AcequiaSystem:
    """
    Load and validate a system from a JSON topology file.

    Args:
        filename: Path to the JSON file

    Returns:
        AcequiaSystem: The validated system
    """
    with open(filename, encoding="utf-8") as f:
        data = json.load(f)
    system = AcequiaSystem.from_dict(data)
    logger.info(
        "Loaded %d regions, %d sources, %d canals from %s",
        len(system.regions),
        len(system.sources),
        len(system.canals),
        filename,
    )
    return system


def save_system(system: AcequiaSystem, filename: str | os.PathLike) -> None:
    """
    Save a system's topology and current levels as JSON.

    Args:
        system: The system to save
        filename: Path to save the file
    """
    directory = os.path.dirname(filename)
    if directory and not os.path.exists(directory):
        os.makedirs(directory)

    with open(filename, "w", encoding="utf-8") as f:
        json.dump(system.to_dict(), f, indent=2)
    logger.info("System saved to %s", filename)


def reports_frame(reports: Iterable[HourReport]) -> pd.DataFrame:
    """Flatten hourly reports into one row per transfer."""
    rows = [
        {
            "hour": report.hour,
            "canal_id": tr.canal_id,
            "donor": tr.donor,
            "target": tr.target,
            "water_source": tr.water_source,
            "amount": tr.amount,
            "flow_rate": volume_to_rate(tr.amount),
        }
        for report in reports
        for tr in report.transfers
    ]
    return pd.DataFrame(rows, columns=REPORT_COLUMNS)


def save_reports(reports: Iterable[HourReport], filename: str | os.PathLike) -> None:
    directory = os.path.dirname(filename)
    if directory and not os.path.exists(directory):
        os.makedirs(directory)

    df = reports_frame(reports)
    df.to_csv(filename, index=False)
    logger.info("Wrote %d transfers to %s", len(df), filename)
