#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import argparse
import enum
import functools
import inspect
import itertools
import logging
import os
import pkgutil
import sys

import ci.log
# to overwrite cli_gen.py log level, call
# "configure_default_logging(force=True, stdout_level=logging.DEBUG)" in specific module cli
ci.log.configure_default_logging(force=True)

import ci.util # noqa: E402
import ctx  # noqa: E402


def _formatter_class():
    terminal_cfg = ctx.cfg.terminal if ctx.cfg else None
    if terminal_cfg and terminal_cfg.output_columns is not None:
        # Create a custom width formatter by fixing two arguments for the default formatter
        # class, namely 'width' (defaults to 80 - 2) and 'max_help_position' (defaults to 24)
        return functools.partial(
            argparse.RawDescriptionHelpFormatter,
            max_help_position=24,
            width=terminal_cfg.output_columns,
        )
    return argparse.RawDescriptionHelpFormatter


FORMATTER_CLASS = _formatter_class()


def main(argv=None):
    '''
    Creates a command line parser (using argparse) for each python module found in this
    directory (except for _this_ module). For each module, a sub-command named as the
    module name is added. Each function defined in a given module is again added as a
    sub-sub-command. Based on the function signature, optional arguments are added.
    This parser is then used to parse the given ARGV. Provided that parsing succeeds,
    the thus specified function is executed.
    '''
    if argv is None:
        argv = sys.argv[1:]

    parser = create_parser()
    if not argv:
        parser.print_usage()
        sys.exit(1)
    parsed = parser.parse_args(argv)
    # write parsed args to global ctx module so called module functions may
    # retrieve if (see ci.util.ctx)
    ctx.args = parsed
    ctx.load_config()

    if parsed.verbose:
        ci.log.configure_default_logging(force=True, stdout_level=logging.DEBUG)
    elif parsed.quiet:
        ci.log.configure_default_logging(force=True, stdout_level=logging.WARNING)

    # mark 'cli' mode
    ci.util._set_cli(True)
    if hasattr(parsed, 'module'):
        parsed.module.args = parsed
        parsed.func(parsed)


def create_parser():
    parser = argparse.ArgumentParser(prog='registry-ingress', formatter_class=FORMATTER_CLASS)
    add_global_args(parser)
    sub_command_parsers = parser.add_subparsers()
    cli_module_dir = os.path.dirname(os.path.abspath(os.path.realpath(__file__)))
    if cli_module_dir not in sys.path:
        sys.path.insert(0, cli_module_dir)
    for _, module_name, _ in pkgutil.iter_modules([cli_module_dir]):
        # skip own module name
        if module_name == os.path.splitext(os.path.basename(__file__))[0]:
            continue
        add_module(module_name, sub_command_parsers)
    return parser


def add_global_args(parser):
    parser.add_argument('--quiet', action='store_true')
    parser.add_argument('--verbose', action='store_true')
    parser.add_argument('--cfg-file', default=None)


def add_module(module_name, parser):
    module = __import__(module_name)

    # skip if module defines a symbol 'main'
    if hasattr(module, 'main'):
        return
    if hasattr(module, '__cmd_name__'):
        cmd_name = module.__cmd_name__
    else:
        cmd_name = module_name

    module_parser = parser.add_parser(
        cmd_name,
        description=inspect.getdoc(module),
        formatter_class=FORMATTER_CLASS,
    )
    module_parser.set_defaults(
      func=display_usage_function(module_parser),
      module=module
    )
    # add module-specific arguments
    if hasattr(module, '__add_module_command_args'):
        getattr(module, '__add_module_command_args')(module_parser)

    function_parsers = module_parser.add_subparsers()

    for fname, function in inspect.getmembers(module, predicate=inspect.isfunction):
        if fname.startswith('_'):
            continue # skip "private" functions
        if function.__module__ != module.__name__:
            continue # skip imported functions
        function_docstring = inspect.getdoc(function)
        function_parser = function_parsers.add_parser(
            fname.replace('_', '-'),
            description=function_docstring,
            formatter_class=FORMATTER_CLASS,
        )
        fspec = inspect.getfullargspec(function)
        function_parser.set_defaults(func=run_function(function))

        action = None
        # defaults are filled "from the end", so reverse both argnames and defaults
        for argname, default in reversed(list(
            itertools.zip_longest(
              reversed(fspec.args),
              reversed(fspec.defaults or []),
              fillvalue=NotImplemented # workaround to be able to discriminate from None
            )
          )):
            cl_arg = '--' + argname.replace('_', '-')
            option_strings = [cl_arg]
            annotation = fspec.annotations.get(argname, None)
            argtype = None
            action = None
            kwargs = {}
            if annotation:
                # special case: CliHint
                if type(annotation) == ci.util.CliHint:
                    typehint = annotation.typehint
                    kwargs.update(annotation.argparse_args)
                    if annotation.short_flag:
                        option_strings.insert(0, annotation.short_flag)
                else:
                    typehint = annotation
                # handle type-specific actions (lists, booleans, ..)
                if type(typehint) == type: # primitives (str, bool, int, ..)
                    argtype = typehint
                    if typehint == bool:
                        action = 'store_true'
                        argtype = None # type must not be set for store_true/store_false actions
                    elif issubclass(typehint, enum.Enum):
                        kwargs['choices'] = [e for e in typehint]
                elif type(typehint) == list:
                    action = 'append'
                elif callable(typehint):
                    argtype = typehint

            if default != NotImplemented:
                required = False
            else:
                required = True
                default = None # set back to None to not have argparser behave strangely :-)

            # add_argument does not allow 'type' as a parameter in some cases;
            # workaround this by omitting it in all cases where it is None anyway
            if argtype is not None and 'type' not in kwargs:
                kwargs['type'] = argtype

            if action:
                kwargs['action'] = action

            if default:
                help_text = kwargs.get('help', '')
                help_text += ' (default: %(default)s)'
                kwargs['help'] = help_text.strip()

            function_parser.add_argument(
              *option_strings,
              required=required,
              default=default,
              dest=argname,
              **kwargs
            )

            if annotation == bool and not argname.startswith('no'):
                cl_arg = '--no-' + argname.replace('_', '-')
                function_parser.add_argument(
                  cl_arg,
                  required=False,
                  dest=argname,
                  action='store_false',
                  help='(default: False)',
                )


def run_function(function):
    def function_runner(args):
        fspec = inspect.getfullargspec(function)
        function_args = []
        for argname in fspec.args:
            function_args.append(getattr(args, argname))
        function(*function_args)
    return function_runner


def display_usage_function(parser):
    def display_usage(_):
        parser.print_usage()
    return display_usage


if __name__ == '__main__':
    main()
