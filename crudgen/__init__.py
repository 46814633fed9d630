"""crud-gen -- generate CRUD front-end code from declarative entity schemas.

Quick usage::

    from crudgen.config import load_config
    from crudgen.pipeline import GenerationPipeline, GenerateOptions
    from crudgen.schema import load_entity

    config = await load_config(".")
    schema = await load_entity("schemas/product.json")
    result = await GenerationPipeline(".", config).run(schema, GenerateOptions())
"""

__version__ = "1.0.0"
