"""
Background workers.
"""

from .will_call_sweeper import run_will_call_sweeper_forever, sweep_once

__all__ = ["run_will_call_sweeper_forever", "sweep_once"]
