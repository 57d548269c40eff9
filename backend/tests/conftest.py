import os
import sys
import tempfile
from pathlib import Path


# Keep tests deterministic and local-only.
os.environ["QHARVEST_SKIP_DOTENV"] = "1"
os.environ["QHARVEST_STATIC_DIR"] = tempfile.mkdtemp(prefix="qharvest_static_")
os.environ["QHARVEST_OCR_BACKEND"] = "mock"
os.environ["QHARVEST_LLM_BACKEND"] = "mock"
os.environ["QHARVEST_BATCH_DELAY_MS"] = "0"
os.environ["OPENAI_KEY"] = ""
os.environ["OPENAI_API_KEY"] = ""

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))
