"""
Main page.

Upload form, current file, order form with product code preview and
hotfolder status on one page.
"""

from flask import Blueprint, render_template, session

from models.form_data import FormData
from routes.common import get_service

main_bp = Blueprint("main", __name__)


@main_bp.route("/")
def index():
    """Render the rename page with the last entered form values."""
    config = get_service("CONFIG_STORE").get_config()
    form_values = session.get("form", {})
    current_file = session.get("current_file")

    product_code = ""
    renamed_filename = ""
    if form_values:
        product_code = get_service("PRODUCT_CODE_GENERATOR").generate(FormData.from_form(form_values), config)
    if product_code and current_file:
        renamed_filename = get_service("FILE_HANDLER").build_renamed_filename(
            product_code, current_file["original_name"]
        )

    return render_template(
        "index.html",
        config=config,
        form=form_values,
        current_file=current_file,
        product_code=product_code,
        renamed_filename=renamed_filename,
        hotfolder=get_service("HOTFOLDER_SERVICE").get_hotfolder_info(),
    )
