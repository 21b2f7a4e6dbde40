"""Force-directed layout: per-node kinematic state and the physics step."""
