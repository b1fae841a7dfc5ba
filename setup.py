from setuptools import find_packages, setup

setup(
    name="formwire",
    version="0.3.0",
    description="Model-bound HTML forms with nested fields and AJAX validation helpers",
    python_requires=">=3.9",
    package_dir={"": "src"},
    packages=find_packages("src"),
    package_data={"formwire": ["templates/*.html"]},
    include_package_data=True,
    install_requires=[
        "jinja2>=3.1",
        "starlette>=0.37",
        "python-multipart>=0.0.9",
        "pydantic>=2.5",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "httpx>=0.27",
        ],
    },
    zip_safe=False,
)
