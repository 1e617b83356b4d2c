"""
Minimal API (FastAPI)

HTTP API for the segment store:
- POST /upload/{filename} - Store a segment
- GET /download/{filename}/{segment_name} - Fetch a segment
- DELETE /delete/{filename} - Delete a file
- GET /requestProof/{filename}/{segment_index} - Merkle proof
- POST /verifyProof - Verify a proof
- GET /list - List files
- GET /health - Health check

Usage:
    uvicorn api.app:app --reload
"""

__version__ = "0.1.0"
