"""Application services: mood interpretation, availability, storage and discovery."""
