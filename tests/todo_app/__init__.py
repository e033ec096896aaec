"""Todo service used to exercise generated bindings end to end."""
