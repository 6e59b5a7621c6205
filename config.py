"""
Central configuration for CO2DE.
All tuneable parameters live here; override via environment variables.
"""
import os
from pathlib import Path

# ── Project root ──────────────────────────────────────────────────────────────
ROOT = Path(__file__).parent

# ── LLM reviewer (OpenRouter chat completions) ────────────────────────────────
OPENROUTER_API_KEY = os.getenv("OPENROUTER_API_KEY", "")
LLM_API_URL        = os.getenv("LLM_API_URL", "https://openrouter.ai/api/v1/chat/completions")
LLM_MODEL          = os.getenv("LLM_MODEL", "google/gemini-2.0-flash-exp:free")
LLM_TIMEOUT_SECS   = int(os.getenv("LLM_TIMEOUT_SECS", "60"))
# Code sent to the model is truncated to this many characters.
LLM_MAX_CODE_CHARS = int(os.getenv("LLM_MAX_CODE_CHARS", "10000"))
LLM_REFERER        = os.getenv("LLM_REFERER", "https://co2de.vercel.app")
LLM_TITLE          = os.getenv("LLM_TITLE", "CO2DE")

# ── Results store ─────────────────────────────────────────────────────────────
RESULTS_PATH = Path(os.getenv("RESULTS_PATH", str(ROOT / "dataset" / "results.json")))

# ── Energy model ──────────────────────────────────────────────────────────────
# Average line length assumed when only the file size is known.
BYTES_PER_LINE = 50

# ── Source files picked up when walking a directory ───────────────────────────
SUPPORTED_EXTENSIONS: frozenset[str] = frozenset({
    ".js", ".jsx", ".mjs", ".cjs",
    ".ts", ".tsx",
    ".py",
    ".rs",
    ".go",
    ".cpp", ".cc", ".hpp",
    ".java",
})
