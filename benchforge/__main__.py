import sys

from benchforge.cli import run_cli

sys.exit(run_cli())
