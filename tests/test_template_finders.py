"""Tests for the template, partial and layout finders."""
import pytest

from usage_finder.analyzer.factory import UsageFinderFactory
from usage_finder.analyzer.template_finders import (
    LayoutTemplateUsageFinder,
    PartialTemplateUsageFinder,
    TemplateUsageFinder,
    render_options,
)

from conftest import SAMPLE_APP, locations

HELLO_CONTROLLER = (
    "class HelloController < ApplicationController\n"
    "  def index\n"
    "  end\n"
    "end\n"
)


class TestSampleApplication:
    """Template usages found in the on-disk sample application."""

    @pytest.mark.parametrize('target, expected', [
        ('app/views/hello/_greeting.html.erb', {
            ('app/controllers/hello_controller.rb', 6),
            ('app/views/hello/index.html.erb', 1),
        }),
        ('app/views/layouts/_header.html.erb', {('app/views/layouts/application.html.erb', 5)}),
        ('app/views/hello/show.html.erb', {('app/controllers/hello_controller.rb', 7)}),
        ('app/views/hello/index.html.erb', set()),
        ('app/views/layouts/test.html.erb', {('app/controllers/hello_controller.rb', 11)}),
        ('app/views/layouts/test2.html.erb', set()),
        ('app/views/layouts/application.html.erb', {
            ('app/controllers/application_controller.rb', 1),
            ('app/controllers/hello_controller.rb', 1),
        }),
        ('app/views/layouts/hello.html.erb', {
            ('app/controllers/admin_controller.rb', 5),
            ('app/controllers/hello_controller.rb', 1),
        }),
        ('app/views/layouts/admin.html.erb', {('app/controllers/admin_controller.rb', 2)}),
    ])
    def test_usages(self, sample_layout, target, expected):
        finder = UsageFinderFactory(sample_layout).generate(target)
        assert locations(finder.usages(), SAMPLE_APP) == expected


class TestRenderOptions:
    """Option extraction from render calls."""

    def test_hash_rocket_and_keyword_syntax(self):
        line = "render :template => 'a/b', layout: \"c\""
        assert list(render_options(line)) == [('template', 'a/b'), ('layout', 'c')]

    def test_symbol_values(self):
        assert list(render_options('render :action => :edit')) == [('action', 'edit')]

    def test_render_to_string(self):
        line = "@html = render_to_string(:partial => 'row', :locals => {})"
        assert list(render_options(line)) == [('partial', 'row')]

    def test_non_literal_values_are_skipped(self):
        line = 'render :layout => false, :partial => "item_#{kind}", :action => name'
        assert list(render_options(line)) == []

    def test_lines_without_render(self):
        assert list(render_options("redirect_to :action => 'index'")) == []


class TestTemplateFinder:
    """template:, action: and file: forms."""

    def test_template_prefix_match(self, make_project):
        layout = make_project({
            'app/views/layouts/test.html.erb': '',
            'app/views/layouts/test2.html.erb': '',
            'app/controllers/pages_controller.rb': "render :template => 'layouts/test'\n",
        })
        matching = TemplateUsageFinder('app/views/layouts/test.html.erb', layout).usages()
        assert locations(matching, layout.root) == {('app/controllers/pages_controller.rb', 1)}
        assert TemplateUsageFinder('app/views/layouts/test2.html.erb', layout).usages() == []

    def test_action_resolves_against_controller_views(self, make_project):
        layout = make_project({
            'app/views/admin/users/edit.html.erb': '',
            'app/views/users/edit.html.erb': '',
            'app/controllers/admin/users_controller.rb': "    render :action => 'edit'\n",
        })
        namespaced = TemplateUsageFinder('app/views/admin/users/edit.html.erb', layout).usages()
        assert locations(namespaced, layout.root) == {('app/controllers/admin/users_controller.rb', 1)}
        assert TemplateUsageFinder('app/views/users/edit.html.erb', layout).usages() == []

    def test_action_outside_controllers_and_views(self, make_project):
        layout = make_project({
            'app/views/mailer/welcome.html.erb': '',
            'lib/mailer.rb': "render :action => 'welcome'\n",
        })
        assert TemplateUsageFinder('app/views/mailer/welcome.html.erb', layout).usages() == []

    def test_file_requires_exact_path(self, make_project):
        layout = make_project({
            'app/views/shared/legal.html.erb': '',
            'app/controllers/pages_controller.rb': "render :file => 'app/views/shared/legal.html.erb'\n"
                                                   "render :file => 'app/views/shared/legal'\n",
        })
        usages = TemplateUsageFinder('app/views/shared/legal.html.erb', layout).usages()
        assert [u.line_number for u in usages] == [1]

    def test_file_with_absolute_path(self, make_project, tmp_path):
        target = tmp_path / 'app/views/shared/legal.rhtml'
        layout = make_project({
            'app/views/shared/legal.rhtml': '',
            'app/controllers/pages_controller.rb': f"render :file => '{target}'\n",
        })
        assert len(TemplateUsageFinder(target, layout).usages()) == 1

    def test_rxml_templates_are_scanned(self, make_project):
        layout = make_project({
            'app/views/feeds/item.rxml': '',
            'app/views/feeds/index.rxml': "xml << render(:template => 'feeds/item')\n",
        })
        assert len(TemplateUsageFinder('app/views/feeds/item.rxml', layout).usages()) == 1


class TestPartialFinder:
    """partial: names omit the leading underscore."""

    def test_partial_from_controller(self, make_project):
        layout = make_project({
            'app/views/hello/_greeting.html.erb': '<p>Hi</p>\n',
            'app/controllers/hello_controller.rb': HELLO_CONTROLLER.replace(
                "  def index\n", "  def index\n    render_to_string(:partial => 'greeting')\n"
            ),
        })
        usages = PartialTemplateUsageFinder('app/views/hello/_greeting.html.erb', layout).usages()
        assert locations(usages, layout.root) == {('app/controllers/hello_controller.rb', 3)}

    def test_partial_with_directory(self, make_project):
        layout = make_project({
            'app/views/shared/_menu.html.erb': '',
            'app/views/hello/index.html.erb': "<%= render :partial => 'shared/menu' %>\n"
                                              "<%= render :partial => 'menu' %>\n",
        })
        usages = PartialTemplateUsageFinder('app/views/shared/_menu.html.erb', layout).usages()
        assert [u.line_number for u in usages] == [1]

    def test_partial_keeps_template_forms(self, make_project):
        layout = make_project({
            'app/views/shared/_menu.html.erb': '',
            'app/views/hello/index.html.erb': "<%= render :template => 'shared/_menu' %>\n",
        })
        assert len(PartialTemplateUsageFinder('app/views/shared/_menu.html.erb', layout).usages()) == 1

    def test_partial_name_prefix_is_bounded(self, make_project):
        layout = make_project({
            'app/views/hello/_item_row.html.erb': '',
            'app/views/hello/index.html.erb': "<%= render :partial => 'item' %>\n",
        })
        assert PartialTemplateUsageFinder('app/views/hello/_item_row.html.erb', layout).usages() == []


class TestLayoutFinder:
    """Explicit declarations, implicit bindings and render layout: options."""

    def test_implicit_layout_named_after_controller(self, make_project):
        layout = make_project({
            'app/views/layouts/hello.html.erb': '',
            'app/views/layouts/application.html.erb': '',
            'app/controllers/hello_controller.rb': HELLO_CONTROLLER,
        })
        for target in ('app/views/layouts/hello.html.erb', 'app/views/layouts/application.html.erb'):
            usages = LayoutTemplateUsageFinder(target, layout).usages()
            assert locations(usages, layout.root) == {('app/controllers/hello_controller.rb', 1)}
            assert usages[0].line_text == 'class HelloController < ApplicationController'

    def test_implicit_layout_of_other_controller(self, make_project):
        layout = make_project({
            'app/views/layouts/admin.html.erb': '',
            'app/controllers/hello_controller.rb': HELLO_CONTROLLER,
        })
        assert LayoutTemplateUsageFinder('app/views/layouts/admin.html.erb', layout).usages() == []

    @pytest.mark.parametrize('declaration', [
        "  layout 'admin'",
        '  layout "admin"',
        '  layout :admin',
        "  layout('admin')",
        "  layout 'layouts/admin'",
    ])
    def test_explicit_declaration(self, make_project, declaration):
        layout = make_project({
            'app/views/layouts/admin.html.erb': '',
            'app/views/layouts/application.html.erb': '',
            'app/controllers/users_controller.rb': f"class UsersController < ApplicationController\n{declaration}\nend\n",
        })
        admin = LayoutTemplateUsageFinder('app/views/layouts/admin.html.erb', layout).usages()
        assert locations(admin, layout.root) == {('app/controllers/users_controller.rb', 2)}

        # An explicit declaration replaces the implicit default layout
        default = LayoutTemplateUsageFinder('app/views/layouts/application.html.erb', layout).usages()
        assert default == []

    @pytest.mark.parametrize('declaration', ['  layout nil', '  layout false', '  layout proc { |c| "x" }'])
    def test_declarations_without_literal_name_disable_implicit_layout(self, make_project, declaration):
        layout = make_project({
            'app/views/layouts/application.html.erb': '',
            'app/controllers/api_controller.rb': f"class ApiController < ApplicationController\n{declaration}\nend\n",
        })
        assert LayoutTemplateUsageFinder('app/views/layouts/application.html.erb', layout).usages() == []

    def test_render_layout_option(self, make_project):
        layout = make_project({
            'app/views/layouts/print.html.erb': '',
            'app/controllers/reports_controller.rb': "class ReportsController < ApplicationController\n"
                                                     "  layout 'admin'\n"
                                                     "  def show\n"
                                                     "    render :action => 'show', :layout => 'print'\n"
                                                     "  end\n"
                                                     "end\n",
            'app/views/reports/index.html.erb': '<%= render :partial => "row", layout: "print" %>\n',
        })
        usages = LayoutTemplateUsageFinder('app/views/layouts/print.html.erb', layout).usages()
        assert locations(usages, layout.root) == {
            ('app/controllers/reports_controller.rb', 4),
            ('app/views/reports/index.html.erb', 1),
        }

    def test_class_line_outside_controller_files(self, make_project):
        layout = make_project({
            'app/views/layouts/application.html.erb': '',
            'lib/hello.rb': 'class HelloController < ApplicationController\nend\n',
        })
        assert LayoutTemplateUsageFinder('app/views/layouts/application.html.erb', layout).usages() == []

    def test_custom_default_layout(self, make_project):
        layout = make_project({
            'app/views/layouts/site.html.erb': '',
            'app/controllers/hello_controller.rb': HELLO_CONTROLLER,
        })
        from dataclasses import replace
        layout = replace(layout, default_layout='site')
        usages = LayoutTemplateUsageFinder('app/views/layouts/site.html.erb', layout).usages()
        assert [u.line_number for u in usages] == [1]

    def test_no_state_between_candidates(self, make_project):
        layout = make_project({
            'app/views/layouts/application.html.erb': '',
            'app/controllers/a_controller.rb': "class AController < ApplicationController\n  layout 'x'\nend\n",
            'app/controllers/b_controller.rb': "class BController < ApplicationController\nend\n",
        })
        usages = LayoutTemplateUsageFinder('app/views/layouts/application.html.erb', layout).usages()
        assert locations(usages, layout.root) == {('app/controllers/b_controller.rb', 1)}

    def test_target_basename(self, sample_layout):
        finder = LayoutTemplateUsageFinder('app/views/layouts/application.html.erb', sample_layout)
        assert finder.target_basename == 'application'
