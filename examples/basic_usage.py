#!/usr/bin/env python3
"""
Basic usage example for the deriving engine.

This example registers a small "show" deriver, builds a compilation unit
with annotated type declarations and an inline placeholder, rewrites it
and prints the result.
"""

from deriving import create_deriver, register, rewrite_signature, rewrite_structure
from deriving.codegen import arg, poly_arrow_of_type_decl, poly_fun_of_type_decl, quote, with_quoter
from deriving.codegen import core_type_of_type_decl
from deriving.compiler import attr
from deriving.syntax import (
    ModStructure,
    ModuleBinding,
    SigType,
    SigValue,
    StrModule,
    StrType,
    StrValue,
    TypArrow,
    TypConstr,
    TypVar,
    TypeDeclaration,
    Variance,
    app,
    attribute,
    binding,
    evar,
    extension,
    lam,
    lid,
    pvar,
    str_const,
    string_of_core_type,
    string_of_signature,
    string_of_structure,
    tarrow,
    tconstr,
    tvar,
)
from deriving.utils import DerivingError, Prefix, expand_path, mangle_lid, mangle_type_decl, path_of_type_decl

BUILTIN_PRINTERS = {
    "int": "string_of_int",
    "bool": "string_of_bool",
    "float": "string_of_float",
}


def expr_of_typ(quoter, typ):
    """Build an expression of type ``typ -> string``."""
    printer = arg.get_attr("show", arg.expr, attr("show", "printer", typ.attributes))
    if printer is not None:
        return quote(quoter, printer)
    if isinstance(typ, TypVar):
        return evar(f"poly_{typ.name}")
    if isinstance(typ, TypConstr):
        name = str(typ.ident)
        if name in BUILTIN_PRINTERS and not typ.args:
            return evar(BUILTIN_PRINTERS[name])
        if name == "string":
            return lam(pvar("x"), evar("x"))
        fn = evar(mangle_lid(Prefix("show"), typ.ident))
        return app(fn, [expr_of_typ(quoter, a) for a in typ.args]) if typ.args else fn
    if isinstance(typ, TypArrow):
        return lam(pvar("_"), str_const("<fun>"))
    raise DerivingError(f"show: cannot derive for {string_of_core_type(typ)}", loc=typ.loc)


def show_of_decl(path, decl):
    if decl.manifest is not None:
        body = with_quoter(expr_of_typ, decl.manifest)
    else:
        label = expand_path(path_of_type_decl(path, decl), decl.name)
        body = lam(pvar("_"), str_const(f"<{label}>"))
    return binding(mangle_type_decl(Prefix("show"), decl), poly_fun_of_type_decl(decl, body))


def type_decl_str(options, path, type_decls):
    if options:
        raise DerivingError(f"show does not support option {options[0][0]}")
    return [StrValue(tuple(show_of_decl(path, decl) for decl in type_decls), recursive=True)]


def type_decl_sig(options, path, type_decls):
    return [
        SigValue(
            mangle_type_decl(Prefix("show"), decl),
            poly_arrow_of_type_decl(
                lambda var: tarrow(var, tconstr("string")),
                decl,
                tarrow(core_type_of_type_decl(decl), tconstr("string")),
            ),
        )
        for decl in type_decls
    ]


def core_type(typ):
    return with_quoter(expr_of_typ, typ)


def main():
    """Demonstrate a rewrite of a small unit."""
    print("deriving - Basic Usage Example")
    print("=" * 60)

    register(create_deriver(
        "show", core_type=core_type, type_decl_str=type_decl_str, type_decl_sig=type_decl_sig,
    ))

    show = attribute("deriving", evar("show"))
    params = ((tvar("a"), Variance.INVARIANT),)
    tree = TypeDeclaration("tree", params=params, attributes=(show,))
    forest = TypeDeclaration(
        "forest", params=params,
        manifest=tconstr("list", [tconstr("tree", [tvar("a")])]),
        attributes=(show,),
    )
    celsius = TypeDeclaration(
        "t",
        manifest=TypConstr(
            lid("float"),
            attributes=(attribute("printer", app(evar("Printf.sprintf"), [str_const("%.1fC")])),),
        ),
        attributes=(show,),
    )
    unit = [
        StrModule(ModuleBinding("Trees", ModStructure((StrType((tree, forest)),)))),
        StrModule(ModuleBinding("Celsius", ModStructure((StrType((celsius,)),)))),
        StrValue((binding("show_ints", extension("derive.show", tconstr("list", [tconstr("int")]))),)),
    ]

    print("\n1. Input:")
    print(string_of_structure(unit))

    print("\n2. Rewritten:")
    print(string_of_structure(rewrite_structure(unit, input_name="example.ml")))

    print("\n3. Interface:")
    print(string_of_signature(rewrite_signature([SigType((tree,))], input_name="example.mli")))

    print("\n4. Errors are located and name the deriver:")
    bad = TypeDeclaration("t", attributes=(attribute("deriving", evar("yojson")),))
    try:
        rewrite_structure([StrType((bad,))], input_name="example.ml")
    except DerivingError as e:
        print(f"   {e}")


if __name__ == '__main__':
    main()
