from setuptools import setup

setup(
    name='xlink-reasy',
    version='0.1.0',
    description='XLink asset link decoder and viewer',
    python_requires='>=3.9',
    packages=['utils', 'file_handlers', 'file_handlers.xlink', 'tools'],
    py_modules=['settings'],
    install_requires=['PySide6'],
    extras_require={'test': ['pytest']},
    entry_points={'console_scripts': ['xlink-export=tools.xlink_export:main']},
)
