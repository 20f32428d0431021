#!/usr/bin/env python3
"""Static website on S3 and CloudFront with a custom domain."""
from .distribution import error_page, rewrite_uri
from .stacks import Site, site_stack
from .certificate import certificate_stack, find_hosted_zone
