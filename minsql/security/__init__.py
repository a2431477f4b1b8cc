"""Access control, row-level security, key-based masking and audit logging."""