#!/usr/bin/env python3
"""
Create the slurry storage workbook and summary report for a farm.

Usage:
    create_slurry_report.py [form.json] [output_dir]

form.json holds the form's camelCase fields (farmName, farmableArea,
earthBankStores, livestock, ...). Without it a demonstration dairy farm
is used.
"""

import json
import logging
import os
import re
import sys

from slurry_wizard import FarmSnapshot, SlurryCalculator
from slurry_wizard.reference import bundled_settings
from slurry_wizard.reports import export_report, export_workbook

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("slurry-report")

OUTPUT_DIR = "."

DEMO_FORM = {
    "farmName": "Demonstration Dairy",
    "farmableArea": 80,
    "gridReference10Fig": "SX 12345 67890",
    "cattleInHerd": 150,
    "cowsInMilk": 100,
    "earthBankStores": [
        {"bankSlope": "Bank slope of 1:2.5 (21.8 degrees)", "volume": 900},
    ],
    "towerStores": [
        {"diameter": 20, "depth": 4},
    ],
    "slurryBags": [{"volume": 0}],
    "yards": [{"area": 600, "description": "Collecting yard"}],
    "roofs": [{"area": 250, "description": "Dairy roof"}],
    "includeParlourWashings": True,
    "parlourWashingsPerCow": 20,
    "livestock": [
        {"type": "Dairy Cow", "age": "After first calf", "yield": "Medium (6000-9000)",
         "number": 100, "slurryPercent": 100},
        {"type": "Dairy Followers", "age": "13-25 months", "number": 40, "slurryPercent": 50},
    ],
}


def _slug(name):
    return re.sub(r"[^A-Za-z0-9]+", "_", name).strip("_") or "farm"


def main(argv):
    form = DEMO_FORM
    if len(argv) > 1:
        with open(argv[1], encoding="utf-8") as f:
            form = json.load(f)
    output_dir = argv[2] if len(argv) > 2 else OUTPUT_DIR
    os.makedirs(output_dir, exist_ok=True)

    calculator = SlurryCalculator(settings=bundled_settings())
    snapshot = FarmSnapshot.from_dict(form)
    result = calculator.calculate(snapshot)

    base = os.path.join(output_dir, f"Slurry_Assessment_{_slug(snapshot.farm.farm_name)}")
    export_workbook(snapshot, result, base + ".xlsx")
    export_report(snapshot, result, base + ".docx")

    print(f"Months of storage: {result.storage_months}")
    print(result.compliance_status)
    for message in result.recommendation_messages:
        print(f"  - {message}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
