"""PlanetForge: procedural planet surface synthesis."""
