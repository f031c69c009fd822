"""
Constants
Centralised wire names and user-facing messages shared by the server and client.
"""
ID_FIELD = "_id"
ID_LENGTH = 32

TITLE_REQUIRED = "Title is required"
DESCRIPTION_REQUIRED = "Description is required"

SERVER_ERROR = "Server Error"
DUPLICATE_VALUE = "Duplicate field value entered"
SUBMIT_FAILED = "Failed to submit bug. Please try again."
BOUNDARY_FALLBACK = "Something went wrong."
BOUNDARY_RELOAD = "Reload page"
