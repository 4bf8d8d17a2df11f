"""
runr - Interactive GitHub Actions workflow dispatcher.

Tools included:
- inputs: workflow_dispatch input normalizer
- plan: prompt plan builder
- invocation: `gh workflow run` argument assembler
- replays: saved-run store on top of the YAML config
- session: guided wizard tying it all together
"""

__version__ = "0.1.0"
__all__ = ["inputs", "plan", "invocation", "replays", "session", "gh", "prompts", "config"]
