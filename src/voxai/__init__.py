"""VoxAi: government scheme discovery with a keyword chatbot.

The backend serves user registration/login, a listing of government
schemes, and a rule-based chat endpoint. The client package keeps a
local session and talks to the backend over HTTP.
"""

__version__ = "1.0.0"
