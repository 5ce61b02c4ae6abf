from setuptools import setup, find_packages, Command

def discover_and_run_tests():
    import os
    import sys
    import unittest

    # get setup.py directory
    setup_file = sys.modules['__main__'].__file__
    setup_dir = os.path.abspath(os.path.dirname(setup_file))

    # use the default shared TestLoader instance
    test_loader = unittest.defaultTestLoader

    # use the basic test runner that outputs to sys.stderr
    test_runner = unittest.TextTestRunner()

    # automatically discover all tests under src/
    test_suite = test_loader.discover(os.path.join(setup_dir, 'src'),
                                      top_level_dir=os.path.join(setup_dir, 'src'))

    # run the test suite
    test_runner.run(test_suite)

class DiscoverTest(Command):
    user_options = []

    def initialize_options(self):
        pass

    def finalize_options(self):
        pass

    def run(self):
        discover_and_run_tests()

setup(name = 'nlpmodels',
      version = '1.0',
      description = 'Nonlinear optimization models with evaluation counters, '
                    'quasi-Newton Hessians and derivative checks',
      package_dir = {'':'src'},
      packages = find_packages('src'),
      cmdclass = {'test': DiscoverTest},
      install_requires=[
        'numpy>1.9',
        'scipy>=1.0',
      ],
      extras_require={
        'docs': [
            'sphinx>=1.3.1',
            'numpydoc>=0.5',
        ],
        'test': [
            'pytest',
        ],
      },
      )
