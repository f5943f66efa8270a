"""Remote code execution: language mapping, dispatch, pacing and verdicts."""
