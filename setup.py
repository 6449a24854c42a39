from setuptools import setup, find_packages

setup(
    name="connectn",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["run"],
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "fastapi",  # HTTP server runtime
        "uvicorn",
        "pydantic",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",  # required by fastapi.testclient
        ],
    },
)
