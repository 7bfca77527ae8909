"""TechServe: technician marketplace backend."""
