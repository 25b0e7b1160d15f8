"""Game core: entities, simulation, input and drawing targets."""
