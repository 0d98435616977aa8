"""tieredpdf CLI Package.

Provides command-line interface for tiered PDF text extraction.

Usage:
    python -m tieredpdf.cli extract paper.pdf --vision --json
    python -m tieredpdf.cli analyze paper.pdf
    python -m tieredpdf.cli estimate 120 --tier free
    python -m tieredpdf.cli validate config/extraction_config.yaml
"""

import typer

from tieredpdf.cli.analyze import analyze_command
from tieredpdf.cli.estimate import estimate_command
from tieredpdf.cli.extract import extract_command
from tieredpdf.cli.validate import validate_command

# Create main app
app = typer.Typer(help="tieredpdf: tiered PDF text extraction with vision fallback")

app.command(name="extract")(extract_command)
app.command(name="analyze")(analyze_command)
app.command(name="estimate")(estimate_command)
app.command(name="validate")(validate_command)

__all__ = [
    "app",
    "extract_command",
    "analyze_command",
    "estimate_command",
    "validate_command",
]
