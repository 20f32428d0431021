#!/usr/bin/env python3
from setuptools import setup, find_packages


VERSION = "0.1.0"


with open("README.md") as fobj:
    long_description = fobj.read().strip()


if __name__ == "__main__":
    setup(
        name="edgesite",
        version=VERSION,
        description="Static websites on S3 and CloudFront, declared in python",
        long_description=long_description,
        long_description_content_type="text/markdown",
        packages=find_packages(exclude=["tests", "tests.*"]),
        python_requires=">=3.8",
        install_requires=[
            "boto3",
            "cfn-lint>=1.0",
            "jinja2",
            "pyyaml",
        ],
        extras_require={
            "test": [
                "moto[cloudformation,route53,s3]>=5.0",
                "pytest",
                "quickjs",
            ],
        },
        entry_points={
            "console_scripts": ["edgesite=edgesite.__main__:main"],
        },
        classifiers=[
            "Development Status :: 4 - Beta",
            "Intended Audience :: Developers",
            "License :: OSI Approved :: MIT License",
            "Topic :: Utilities",
        ],
    )
