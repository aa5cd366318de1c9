"""Route Modules — one file per handler group or inline responder.

Invariants:
    - Each module defines its own APIRouter; prefixes are assigned at mount time
    - Routes never contain provider logic (delegate to the VoiceService)
"""
