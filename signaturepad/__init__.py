"""
Signature pad module.

Captures freehand strokes into a replayable segment log, renders them as a
smoothed variable-width signature and exports the raw log as JSON or bitmap.
"""
