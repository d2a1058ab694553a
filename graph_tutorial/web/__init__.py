"""Graph Tutorial web app (FastAPI).

Run with:
    uvicorn graph_tutorial.web.main:app --port 5000
"""
