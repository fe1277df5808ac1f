# tests/test_seed.py
import importlib.util
from pathlib import Path

from clinic_api.core.records import derive_fields, validate_record

SEED_SCRIPT = Path(__file__).resolve().parent.parent / "scripts" / "seed_database.py"


def _load_seed_module():
    spec = importlib.util.spec_from_file_location("seed_database", SEED_SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_seed_rows_pass_record_rules():
    seed = _load_seed_module()
    for i in range(25):
        record = validate_record(derive_fields(None, seed.random_patient(i)))
        assert len(record["aadhar_no"]) == 12
        assert record["bmi"] is not None
