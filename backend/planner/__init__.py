"""Student Project Planner backend."""
