"""External collaborators behind abstract interfaces."""
