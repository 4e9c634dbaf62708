"""Terminal UI shell for htachat."""
