"""Reference agents for the Fruit Run environment."""
