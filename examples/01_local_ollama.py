import os

from phish_content_analyzer.cli import run_once

os.environ.setdefault("PHISH_ANALYZER_PROFILE", "ollama")
os.environ.setdefault("PHISH_ANALYZER_MODEL", "ollama/qwen2.5:7b")
print(run_once("Dear Customer, your parcel is on hold. Pay the fee at https://bit.ly/parcel-fee today."))
