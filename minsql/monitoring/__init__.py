"""Alerts, query performance tracking and host health checks."""