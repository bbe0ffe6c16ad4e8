import importlib
import sys
from pathlib import Path

SRC_ROOT = Path(__file__).resolve().parent / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from employee_management import create_app
from employee_management.config import get_settings_module

app = create_app()

if __name__ == "__main__":
    settings = importlib.import_module(get_settings_module())
    app.run(host="0.0.0.0", port=int(getattr(settings, "PORT", 5000)), debug=app.config["DEBUG"])
