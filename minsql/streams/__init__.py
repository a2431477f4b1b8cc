"""Change data capture, event sourcing and publish/subscribe."""