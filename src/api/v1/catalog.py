"""Gene catalog browsing endpoints."""

from fastapi import APIRouter, HTTPException

from src.api.v1.schemas import CatalogResponse, FunctionSchema, CategorySchema
from src.optimizer.core.catalog import (
    ImplementationGroup,
    genes_for,
    functions_for,
    categories_for,
    genes_for_category,
)

router = APIRouter()


def _parse_group(group: str) -> ImplementationGroup:
    value = group.strip().upper()
    if value.isdigit():
        value = f"IG{value}"
    try:
        return ImplementationGroup[value]
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown implementation group: {group}") from None


@router.get("/catalog/{group}", response_model=CatalogResponse)
async def get_catalog(group: str) -> CatalogResponse:
    """Functions, categories and genes active for an implementation group."""
    implementation_group = _parse_group(group)
    return CatalogResponse(
        implementation_group=implementation_group.name,
        gene_count=len(genes_for(implementation_group)),
        functions=[
            FunctionSchema(
                code=function.value,
                name=function.name,
                categories=[
                    CategorySchema(
                        code=category.value,
                        name=category.name,
                        genes=[g.name for g in genes_for_category(category, implementation_group)],
                    )
                    for category in categories_for(implementation_group, function)
                ],
            )
            for function in functions_for(implementation_group)
        ],
    )
