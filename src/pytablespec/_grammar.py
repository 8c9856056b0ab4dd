"""Lark grammar for annotated record definitions."""

GRAMMAR = r"""
record: attribute* visibility _record_body
_record_body: named_struct | tuple_struct | unit_struct | enum_def

named_struct: "struct" IDENT "{" field_list "}"
tuple_struct: "struct" IDENT "(" tuple_field_list ")" [";"]
unit_struct: "struct" IDENT ";"
enum_def: "enum" IDENT "{" variant_list "}"

field_list: [field ("," field)* [","]]
field: attribute* visibility IDENT ":" type

tuple_field_list: [tuple_field ("," tuple_field)* [","]]
tuple_field: attribute* visibility type

variant_list: [variant ("," variant)* [","]]
variant: attribute* IDENT [variant_payload]
variant_payload: "(" tuple_field_list ")"
               | "{" field_list "}"

visibility: PUB?

type: path [generic_args]                   -> type_path
    | "(" [type ("," type)* [","]] ")"      -> type_tuple
    | "[" type [";" SIGNED_NUMBER] "]"      -> type_array
    | "&" type                              -> type_ref
generic_args: "<" type ("," type)* ">"

attribute: "@" named_meta

?meta: named_meta
     | literal                  -> meta_literal
     | list                     -> meta_literal

?named_meta: path                       -> meta_flag
           | path "=" value             -> meta_value
           | path "(" meta_args ")"     -> meta_group

meta_args: [meta ("," meta)* [","]]

?value: path
      | literal
      | list

list: "[" [value ("," value)* [","]] "]"
literal: SIGNED_NUMBER | ESCAPED_STRING

path: IDENT (("." | "::") IDENT)*

PUB: "pub"
IDENT: /[A-Za-z_][A-Za-z0-9_]*/
COMMENT: /\/\/[^\n]*/

%import common.SIGNED_NUMBER
%import common.ESCAPED_STRING
%import common.WS
%ignore WS
%ignore COMMENT
"""
