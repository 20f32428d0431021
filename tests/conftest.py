#!/usr/bin/env python3
"""
Shared test setup: fake credentials so nothing ever reaches a real account.
"""
import os


os.environ["AWS_DEFAULT_REGION"] = "us-east-1"
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
os.environ["AWS_SECURITY_TOKEN"] = "testing"
os.environ["AWS_SESSION_TOKEN"] = "testing"
for name in list(os.environ):
    if name.startswith("EDGESITE_"):
        del os.environ[name]
